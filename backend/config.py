import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///courtside.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Court diagram used by new games unless the operator picks another (fiba, nba)
    DEFAULT_COURT_STANDARD = os.environ.get('DEFAULT_COURT_STANDARD', 'fiba')
    # Undo depth and play-by-play length per game
    UNDO_LIMIT = int(os.environ.get('UNDO_LIMIT', '20'))
    PLAY_BY_PLAY_LIMIT = int(os.environ.get('PLAY_BY_PLAY_LIMIT', '50'))
    # Clock tick interval (seconds); one tick takes one second off the clocks
    CLOCK_TICK_SEC = float(os.environ.get('CLOCK_TICK_SEC', '1'))
    # How often viewers should poll the state endpoint (seconds)
    VIEWER_POLL_SEC = int(os.environ.get('VIEWER_POLL_SEC', '2'))
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '12'))
