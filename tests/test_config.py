from config import Config, GIB, MIB, ProductionConfig, TestingConfig, get_config


def test_policy_defaults():
    assert Config.PRINT_MAX_FILE_SIZE == 50 * MIB
    assert Config.TRANSFER_MAX_FILE_SIZE == 100 * MIB
    assert Config.TRANSFER_MAX_BATCH_SIZE == 10 * GIB
    assert Config.TRANSFER_MAX_AGE == 24 * 60 * 60
    assert Config.TRANSFER_SWEEP_INTERVAL == 60 * 60
    assert Config.CONVERSION_TIMEOUT == 60
    assert Config.PRINT_CLEANUP_DELAY == 5
    assert Config.QUEUE_VIEW_LIMIT == 50


def test_request_limit_fits_a_full_batch():
    assert Config.MAX_CONTENT_LENGTH > Config.TRANSFER_MAX_BATCH_SIZE


def test_get_config_by_name(monkeypatch):
    assert get_config("testing") is TestingConfig
    assert get_config("unknown") is ProductionConfig

    monkeypatch.setenv("PRINTDROP_ENV", "testing")
    assert get_config() is TestingConfig


def test_testing_config_disables_background_work():
    assert TestingConfig.TRANSFER_SWEEP_ENABLED is False
    assert TestingConfig.LOG_TO_FILE is False
