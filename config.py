import os

from dotenv import load_dotenv

load_dotenv()


def _env_list(name, default):
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me')

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///resume_board.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Uploads
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', 'uploads')
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024
    ALLOWED_EXTENSIONS = {'pdf', 'docx', 'txt'}

    # Mail (Flask-Mail)
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'true').lower() == 'true'
    MAIL_USERNAME = os.environ.get('EMAIL_USER')
    MAIL_PASSWORD = os.environ.get('EMAIL_PASS')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', os.environ.get('EMAIL_USER'))
    OTP_LENGTH = 6

    # Job description generation
    INFERENCE_API_URL = os.environ.get(
        'INFERENCE_API_URL',
        'https://api-inference.huggingface.co/models/EleutherAI/gpt-neo-2.7B',
    )
    INFERENCE_API_KEY = os.environ.get('HUGGING_FACE_API_KEY')
    INFERENCE_TIMEOUT = float(os.environ.get('INFERENCE_TIMEOUT', 60))

    # Route groups mounted by create_app
    ENABLED_SERVICES = _env_list('ENABLED_SERVICES', 'resumes,jobs,mail')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()


class TestingConfig(Config):
    TESTING = True
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = 'noreply@example.com'
    INFERENCE_API_KEY = 'test-key'
