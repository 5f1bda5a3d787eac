import pytest

from bundles.invocation_state import FAILED, SUCCESS
from bundles.session import BundleSession
from models.bundle import RemoteBundle
from storage.analysis_store import InMemoryAnalysisResultsStore

from conftest import ROOT, FakeServiceClient, happy_script

OTHER = "/home/dev/other"


@pytest.fixture()
def client():
    return FakeServiceClient(
        files={ROOT: ["/a.js", "/lib/b.ts"], OTHER: ["/index.js"]},
        script=lambda files: happy_script(ROOT if files[0].startswith(ROOT + "/") else OTHER),
    )


@pytest.fixture()
def session(client, progress, error_handler):
    return BundleSession(client, progress=progress, error_handler=error_handler, token="session-token")


async def test_full_cycle_for_current_workspace(session, client):
    session.add_workspaces([ROOT, OTHER])
    session.set_current_workspace(ROOT)
    await session.refresh_filters()

    context = await session.analyse_workspace(session.workspaces.current)
    await session.rebuild_hash_bundles(ROOT)

    assert context.outcome == SUCCESS
    assert ("get_filters", "session-token") in client.calls
    assert isinstance(session.results, InMemoryAnalysisResultsStore)
    assert set(session.results.get(ROOT).files) == {"/a.js"}
    assert session.hash_bundles.get(ROOT) == {"/a.js": "/a.js", "/lib/b.ts": "/lib/b.ts"}
    assert session.hash_bundles_empty(OTHER)


async def test_analysis_without_filters_does_nothing(session, client):
    session.add_workspaces([ROOT])

    assert await session.analyse_workspace(ROOT) is None
    assert client.calls == []


async def test_rebuild_all_reuses_last_run_file_list(session):
    session.add_workspaces([ROOT, OTHER])
    await session.refresh_filters()
    await session.analyse_workspace(OTHER)

    await session.rebuild_hash_bundles()

    assert session.hash_bundles.workspaces == [ROOT, OTHER]
    assert session.hash_bundles.get(ROOT) == {"/index.js": "/index.js"}
    assert session.hash_bundles.get(OTHER) == {"/index.js": "/index.js"}


async def test_analyse_all_runs_in_registry_order(session, client):
    session.add_workspaces([OTHER, ROOT])
    await session.refresh_filters()

    runs = await session.analyse_all()

    assert list(runs) == [OTHER, ROOT]
    assert [call[1] for call in client.calls if call[0] == "start_upload"] == [OTHER, ROOT]
    assert all(context.outcome == SUCCESS for context in runs.values())


async def test_removing_workspace_drops_its_bundles(session):
    session.add_workspaces([ROOT, OTHER])
    await session.refresh_filters()
    await session.analyse_workspace(ROOT)
    await session.rebuild_hash_bundles()
    session.update_remote_bundle(ROOT, RemoteBundle(bundleId="bundle-1"))
    session.update_remote_bundle(OTHER, RemoteBundle(bundleId="bundle-2"))

    await session.update_workspace(ROOT, remove=True)

    assert session.workspace_paths == [OTHER]
    assert session.hash_bundles_empty(ROOT)
    assert session.remote_bundles_empty(ROOT)
    assert not session.hash_bundles_empty(OTHER)
    assert not session.remote_bundles_empty(OTHER)


async def test_update_workspace_adds_path(session):
    await session.update_workspace(ROOT)
    await session.update_workspace(ROOT)

    assert session.workspace_paths == [ROOT]


def test_token_defaults_to_settings(client, monkeypatch):
    from config.settings import settings

    monkeypatch.setattr(settings, "session_token", "from-env")

    assert BundleSession(client).token == "from-env"


async def test_analyse_all_continues_past_a_failing_workspace(client, session, error_handler):
    listing = client.start_upload

    def start_upload(path, filter_list):
        if path == OTHER:
            raise PermissionError("denied")
        return listing(path, filter_list)

    client.start_upload = start_upload
    session.add_workspaces([OTHER, ROOT])
    await session.refresh_filters()

    runs = await session.analyse_all()

    assert runs[OTHER].outcome == FAILED
    assert runs[ROOT].outcome == SUCCESS
    assert len(error_handler.reports) == 1
