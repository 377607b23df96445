import logging

from tacpy.log import NUMERICS, ScatteringLogger, scattering_logger


def test_numerics_level_is_routed_through_the_module_logger(caplog):
    logger = scattering_logger("tacpy.coupling")
    assert isinstance(logger, ScatteringLogger)
    assert logger.logger is logging.getLogger("tacpy.coupling")

    with caplog.at_level(NUMERICS, logger="tacpy.coupling"):
        logger.numerics("cached %d coefficients", 12)
        logger.debug("hidden")
    assert [r.levelname for r in caplog.records] == ["NUMERICS"]
    assert caplog.records[0].getMessage() == "cached 12 coefficients"


def test_standard_logger_class_is_untouched():
    assert not hasattr(logging.Logger, "numerics")
    assert not hasattr(logging.getLogger("unrelated"), "numerics")
