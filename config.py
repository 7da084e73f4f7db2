# config.py


class Config:
    DEBUG = False
    TESTING = False
    # None keeps schedule.use_mock_data_on_failure from config.json
    USE_MOCK_DATA_ON_FAILURE = None


class ProductionConfig(Config):
    pass


class DevelopmentConfig(Config):
    DEBUG = True
    # Local dev without sheet access still gets a dashboard
    USE_MOCK_DATA_ON_FAILURE = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    USE_MOCK_DATA_ON_FAILURE = False
