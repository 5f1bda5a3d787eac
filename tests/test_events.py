import pytest

from clients.events import BundleEventEmitter
from models.events import BuildFinish, PipelineFailed, StageKind, UploadProgress, is_terminal

from conftest import finish_event


def test_emit_reaches_only_matching_listeners():
    emitter = BundleEventEmitter()
    seen = []
    emitter.on(StageKind.BUILD_FINISH, seen.append)
    emitter.on(StageKind.UPLOAD_PROGRESS, seen.append)

    assert emitter.emit(BuildFinish()) == 1
    assert emitter.emit(finish_event("/r", {})) == 0

    assert seen == [BuildFinish()]


def test_off_and_remove_listeners():
    emitter = BundleEventEmitter()
    first, second = [], []
    emitter.on(StageKind.UPLOAD_PROGRESS, first.append)
    emitter.on(StageKind.UPLOAD_PROGRESS, second.append)
    emitter.on(StageKind.ERROR, first.append)
    assert emitter.listener_count() == 3

    emitter.off(StageKind.UPLOAD_PROGRESS, first.append)
    emitter.emit(UploadProgress(processed=1, total=2))
    assert first == [] and len(second) == 1

    emitter.remove_listeners(StageKind.UPLOAD_PROGRESS)
    assert emitter.listener_count(StageKind.UPLOAD_PROGRESS) == 0
    assert emitter.listener_count() == 1

    emitter.remove_listeners()
    assert emitter.listener_count() == 0


def test_listener_errors_propagate():
    emitter = BundleEventEmitter()

    def broken(event):
        raise RuntimeError("listener bug")

    emitter.on(StageKind.BUILD_FINISH, broken)
    with pytest.raises(RuntimeError):
        emitter.emit(BuildFinish())


def test_terminal_kinds():
    assert is_terminal(finish_event("/r", {}))
    assert is_terminal(PipelineFailed(error=ValueError("x")))
    assert not is_terminal(BuildFinish())
    assert StageKind.UPLOAD_FINISH.value == "uploadFilesFinish"
