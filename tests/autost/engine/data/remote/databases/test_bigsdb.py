from os import path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from autost.engine.analysis.sequence_type import SequenceTypeResolver
from autost.engine.data.remote.databases.bigsdb import BIGSdbProfileTableDownloader
from autost.engine.exceptions.profiles import BIGSdbProfileDownloadException

with open("tests/resources/escherichia_coli_profiles.txt", "rb") as profiles_handle:
    ecoli_profiles_bytes = profiles_handle.read()


@pytest.fixture
async def dummy_bigsdb():
    async def profiles_csv(request: web.Request):
        return web.Response(body=ecoli_profiles_bytes, content_type="text/plain")
    app = web.Application()
    app.router.add_get("/api/db/pubmlst_ecoli_achtman_seqdef/schemes/1/profiles_csv", profiles_csv)
    async with TestServer(app) as server:
        yield str(server.make_url("/api"))

async def test_download_profiles_writes_table(dummy_bigsdb: str, tmp_path):
    destination = path.join(tmp_path, "profiles.txt")
    async with BIGSdbProfileTableDownloader(dummy_bigsdb, "pubmlst_ecoli_achtman_seqdef", 1) as downloader:
        assert await downloader.download_profiles(destination) == destination
    with open(destination, "rb") as downloaded_handle:
        assert downloaded_handle.read() == ecoli_profiles_bytes

async def test_downloaded_profiles_resolve(dummy_bigsdb: str, tmp_path):
    destination = path.join(tmp_path, "profiles.txt")
    async with BIGSdbProfileTableDownloader(dummy_bigsdb, "pubmlst_ecoli_achtman_seqdef", 1) as downloader:
        await downloader.download_profiles(destination)
    resolver = SequenceTypeResolver(destination, ["adk-10", "fumC-11", "gyr_B-4", "icd-8", "mdh-8", "purA-8", "recA-2"])
    assert resolver.sequence_type == "10"

async def test_download_unknown_scheme_raises(dummy_bigsdb: str, tmp_path):
    async with BIGSdbProfileTableDownloader(dummy_bigsdb, "pubmlst_ecoli_achtman_seqdef", 2) as downloader:
        with pytest.raises(BIGSdbProfileDownloadException) as exception_info:
            await downloader.download_profiles(path.join(tmp_path, "profiles.txt"))
    assert exception_info.value.status == 404
