import httpx
import time
from typing import Dict, Any, List
from pydantic import ValidationError
from ..config import settings
from ..errors import PricesApiError
from ..schemas import PriceRecord
from ..utils.logger import logger

UA = {"User-Agent": "btc-tracker/1.0"}

def _headers() -> Dict[str, str]:
    headers = dict(UA)
    headers["Content-Type"] = "application/json"
    headers["Accept"] = "application/json"
    if settings.prices_api_token:
        headers["Authorization"] = f"Bearer {settings.prices_api_token}"
    return headers

def _client() -> httpx.Client:
    return httpx.Client(headers=_headers(), timeout=settings.request_timeout)

def _check(r: httpx.Response) -> httpx.Response:
    if r.status_code in (401, 403):
        raise PricesApiError(f"Unauthorized for {r.request.url} (check PRICES_API_TOKEN).")
    if r.is_error:
        raise PricesApiError(f"HTTP error! status: {r.status_code}, details: {r.text}")
    return r

def _reply_body(r: httpx.Response) -> Any:
    # a write that succeeded is never retried, whatever the reply body holds
    try:
        return r.json() if r.content else None
    except ValueError:
        logger.warning(f"Non-JSON reply to POST ({r.status_code}): {r.text[:200]!r}")
        return None

def new_record_id() -> str:
    # millisecond timestamp, same shape the mobile client used
    return str(int(time.time() * 1000))

def fetch_prices(client: httpx.Client | None = None) -> List[PriceRecord]:
    """
    Read the whole price history. No retry: a failure is reported to the caller.
    Rows that do not validate as a PriceRecord are skipped.
    """
    url = settings.prices_api_url
    logger.debug(f"GET {url}")
    try:
        if client is None:
            with _client() as c:
                data = _check(c.get(url)).json()
        else:
            data = _check(client.get(url, headers=_headers())).json()
    except PricesApiError as e:
        logger.error(f"Price history request failed: {e}")
        raise
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Price history request failed: {e}")
        raise PricesApiError(f"Price history request failed: {e}") from e

    if not isinstance(data, list):
        raise PricesApiError(f"Unexpected price history payload: {type(data).__name__}")

    records: List[PriceRecord] = []
    for row in data:
        try:
            records.append(PriceRecord.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping malformed price row {row!r}: {e.errors()[0]['msg']}")
    logger.info(f"Loaded {len(records)} price records")
    return records

def post_price(record: PriceRecord, client: httpx.Client | None = None) -> PriceRecord:
    """
    Append one record. Retries with exponential backoff; the generated id is
    kept across attempts. Returns the record as stored by the server.
    """
    url = settings.prices_api_url
    attempts = max(1, settings.write_max_attempts)
    body = record.model_copy(update={"id": record.id or new_record_id()}).to_wire()

    last_err = None
    for attempt in range(1, attempts + 1):
        try:
            logger.debug(f"Attempt {attempt} - POST {url}: {body}")
            if client is None:
                with _client() as c:
                    r = _check(c.post(url, json=body))
            else:
                r = _check(client.post(url, json=body, headers=_headers()))
        except (PricesApiError, httpx.HTTPError) as e:
            last_err = e
            logger.warning(f"Attempt {attempt}/{attempts} to store price failed: {e}")
            if attempt < attempts:
                time.sleep(settings.write_backoff_base * 2 ** (attempt - 1))
            continue
        logger.info(f"Stored price record for {body['Date']} (attempt {attempt})")
        data = _reply_body(r)
        stored = {**body, **data} if isinstance(data, dict) else body
        try:
            return PriceRecord.model_validate(stored)
        except ValidationError:
            # the write went through; fall back to what was sent
            logger.warning(f"Unexpected stored record {data!r}, returning submitted one")
            return PriceRecord.model_validate(body)
    logger.error("All retry attempts failed")
    raise PricesApiError(f"Failed to post data after {attempts} attempts: {last_err}")
