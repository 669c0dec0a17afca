# app/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.domain.errors import StaleCartError
from app.utils.settings import DB_CONNECT_ATTEMPTS


def db_connect_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(DB_CONNECT_ATTEMPTS),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(OperationalError),
    )


def stale_cart_retry():
    #optimistic locking: ponow caly read-modify-write gdy wersja koszyka sie zmienila
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(StaleCartError),
    )
