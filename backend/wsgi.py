# backend/wsgi.py
from salonsync import create_app

app = create_app()
