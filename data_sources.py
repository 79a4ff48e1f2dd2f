"""
Module de sources de données pour BagsClaimBot
Récupère les statistiques de frais (bags.fm) et de trading (Jupiter) pour chaque cycle
"""

import asyncio
import aiohttp
import logging
from typing import Dict, List, Optional, Any, Tuple

from config import get_target_tokens
from models import FetchError

logger = logging.getLogger("data_sources")


class DataSource:
    """
    Source de données pour les tokens
    Both upstream datasets are fetched concurrently; a failure of either one
    raises FetchError once both requests have settled.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.fee_stats_url = config.get("FEE_STATS_URL", "")
        self.trading_stats_url = config.get("TRADING_STATS_URL", "")
        self.timeout = aiohttp.ClientTimeout(total=float(config.get("REQUEST_TIMEOUT_SECONDS", 10)))
        self.targets = get_target_tokens(config)

        logger.info(f"Initialized DataSource (targets: {', '.join(self.targets) or 'all tokens'})")

    def resolve_trading_stats_url(self) -> Optional[str]:
        """
        Jupiter search takes a comma-separated list of mints. Without explicit targets
        a templated URL has nothing to search for, so enrichment is skipped.
        """
        url = self.trading_stats_url
        if not url:
            return None
        if "{query}" in url:
            if not self.targets:
                return None
            return url.format(query=",".join(self.targets))
        return url

    async def fetch_json(self, session: aiohttp.ClientSession, url: str) -> Any:
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    body = await response.text()
                    raise FetchError(url, response.status, body)
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise FetchError(url, response.status, f"malformed JSON: {e}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, None, str(e) or e.__class__.__name__)

    async def fetch_fee_stats(self, session: aiohttp.ClientSession) -> List[Dict[str, Any]]:
        """
        Récupère le classement des tokens par frais cumulés depuis bags.fm

        Returns:
            Liste brute des tokens (frais, créateurs, montants réclamés)
        """
        data = await self.fetch_json(session, self.fee_stats_url)
        tokens = data.get("response", data) if isinstance(data, dict) else data
        if not isinstance(tokens, list):
            raise FetchError(self.fee_stats_url, 200, f"expected a token list, got {type(tokens).__name__}")
        return [t for t in tokens if isinstance(t, dict)]

    async def fetch_trading_stats(self, session: aiohttp.ClientSession) -> List[Dict[str, Any]]:
        """
        Récupère prix, market cap, liquidité et volume depuis Jupiter

        Returns:
            Liste brute des assets Jupiter (vide si aucune cible n'est configurée)
        """
        url = self.resolve_trading_stats_url()
        if not url:
            return []
        data = await self.fetch_json(session, url)
        if isinstance(data, dict):
            data = data.get("data", [data])
        if not isinstance(data, list):
            raise FetchError(url, 200, f"expected an asset list, got {type(data).__name__}")
        return [a for a in data if isinstance(a, dict)]

    async def fetch_all(
        self, session: Optional[aiohttp.ClientSession] = None
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Returns:
            (fee_stats, trading_stats)
        """
        if session is None:
            async with aiohttp.ClientSession(timeout=self.timeout) as own_session:
                return await self._gather(own_session)
        return await self._gather(session)

    async def _gather(self, session: aiohttp.ClientSession) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        fee_result, trading_result = await asyncio.gather(
            self.fetch_fee_stats(session),
            self.fetch_trading_stats(session),
            return_exceptions=True,
        )

        for result in (fee_result, trading_result):
            if isinstance(result, BaseException):
                raise result

        logger.info(f"[FETCH] ✅ {len(fee_result)} fee entries, {len(trading_result)} trading entries")
        return fee_result, trading_result
