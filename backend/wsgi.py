# backend/wsgi.py
from quinzena import create_app

app = create_app()
