from app.togglehub import create_app

app = create_app()
