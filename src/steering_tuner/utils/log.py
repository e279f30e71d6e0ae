"""로깅 설정."""
import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-5s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """steering_tuner 패키지 로거 설정.

    Args:
        level: 로그 레벨
        log_file: 지정 시 파일에도 기록

    Returns:
        패키지 루트 로거
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    log = logging.getLogger("steering_tuner")
    log.setLevel(level)
    for handler in list(log.handlers):
        log.removeHandler(handler)

    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    log.addHandler(sh)

    if log_file:
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fh.setFormatter(formatter)
        log.addHandler(fh)

    return log
