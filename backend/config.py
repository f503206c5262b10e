import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///countup.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Live update stream polling period (seconds)
    LIVE_UPDATE_INTERVAL_SEC = float(os.environ.get('LIVE_UPDATE_INTERVAL_SEC', '10'))
    # Comma-separated list of origins allowed to call the API from a browser
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5000,http://127.0.0.1:5000',
        ).split(',') if o.strip()
    ]
    # How long the goal-reached banner stays visible in the browser
    CELEBRATION_DURATION_MS = int(os.environ.get('CELEBRATION_DURATION_MS', '5000'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
