from contextlib import AbstractAsyncContextManager
import logging
from os import PathLike
from typing import Union

from aiohttp import ClientSession, ClientTimeout

from autost.engine.exceptions.profiles import BIGSdbProfileDownloadException

logger = logging.getLogger(__name__)

class BIGSdbProfileTableDownloader(AbstractAsyncContextManager):
    """Fetches the tab-delimited profile table of a BIGSdb scheme for local typing."""

    def __init__(self, database_api: str, database_name: str, schema_id: int):
        self._database_name = database_name
        self._schema_id = schema_id
        self._base_url = f"{database_api}/db/{self._database_name}/schemes/{self._schema_id}/"
        self._http_client = ClientSession(self._base_url, timeout=ClientTimeout(10000))

    async def __aenter__(self):
        return self

    async def download_profiles(self, destination: Union[str, PathLike[str]]) -> Union[str, PathLike[str]]:
        # See https://bigsdb.pasteur.fr/api/db/pubmlst_bordetella_seqdef/schemes/3/profiles_csv
        async with self._http_client.get("profiles_csv") as profiles_response:
            if profiles_response.status != 200:
                raise BIGSdbProfileDownloadException(self._database_name, self._schema_id, profiles_response.status)
            with open(destination, "wb") as profile_cache_handle:
                async for chunk, eof in profiles_response.content.iter_chunks():
                    profile_cache_handle.write(chunk)
        logger.debug("Downloaded profiles for \"%s\" scheme %d to \"%s\".", self._database_name, self._schema_id, destination)
        return destination

    async def close(self):
        await self._http_client.close()

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.close()
