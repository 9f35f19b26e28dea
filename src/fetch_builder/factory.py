"""
Factory functions for creating request builders.
"""
import logging
from typing import Dict, Optional

from .auth.signer import SignerProvider
from .config import BuilderConfig, create_doer, validate_config
from .core.client import FetchBuilder
from .decoders.response_decoder import ResponseDecoder
from .types import AsyncDoer, Doer

logger = logging.getLogger("fetch_builder.factory")


def new(doer: Optional[Doer] = None, async_doer: Optional[AsyncDoer] = None) -> FetchBuilder:
    """Return a new builder using the default doers unless others are given."""
    return FetchBuilder(doer=doer, async_doer=async_doer)


def create_builder(
    config: Optional[BuilderConfig] = None,
    *,
    base_url: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    doer: Optional[Doer] = None,
    async_doer: Optional[AsyncDoer] = None,
    signer: Optional[SignerProvider] = None,
    response_decoder: Optional[ResponseDecoder] = None,
    debug: Optional[bool] = None,
) -> FetchBuilder:
    """
    Create a builder from a BuilderConfig and/or keyword overrides.

    Keyword arguments take precedence over the config. When the config sets
    a timeout or verify flag and no doer is given, a dedicated httpx.Client is
    created for the builder; otherwise the process-wide default is used.

    Example:
        api = create_builder(
            base_url="https://api.example.com/v1/",
            headers={"User-Agent": "inventory-sync"},
            signer=BearerSigner(token),
        )
        items = api.new().get("items").receive_success(List[Item]).success
    """
    config = config or BuilderConfig()
    if base_url is not None:
        config = BuilderConfig(
            base_url=base_url,
            headers=config.headers,
            timeout=config.timeout,
            verify=config.verify,
            debug=config.debug,
        )
    validate_config(config)

    if doer is None and (config.timeout is not None or config.verify is not None):
        doer = create_doer(config)

    builder = FetchBuilder(doer=doer, async_doer=async_doer).base(config.base_url)
    for key, value in {**config.headers, **(headers or {})}.items():
        builder.set_header(key, value)
    builder.signer(signer).response_decoder(response_decoder)
    if debug is not None or config.debug:
        builder.debug(config.debug if debug is None else debug)

    logger.debug(f"create_builder: base_url={config.base_url}, dedicated_doer={doer is not None}")
    return builder
