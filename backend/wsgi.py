# backend/wsgi.py
# FLASK_APP entry point: python -m flask --app wsgi.py run
from sales_calculator import create_app

app = create_app()
