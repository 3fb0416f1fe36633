import structlog
import msod


def test_logger():
    # importing msod leaves the global structlog configuration to the host
    assert not structlog.is_configured()
    msod.logger.info("msod logger is usable")
    msod.logger.debug("filtered out at the default level")
