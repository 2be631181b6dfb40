"""End-to-end bundle lifecycle through the public API."""

import asyncio
import functools

from code_client import (
    RemoteBundle,
    check_bundle,
    create_bundle,
    extend_bundle,
    get_analysis,
    poll_until_terminal,
)
from code_client.encoding import decode_and_decompress
from conftest import FakeExecutor, ok


def test_create_extend_then_analyse(options):
    executor = FakeExecutor(
        ok({"bundleHash": "parent", "missingFiles": ["b.py"]}),
        ok({"bundleHash": "child", "missingFiles": []}),
        ok({"bundleHash": "child", "missingFiles": []}),
        ok({"status": "ANALYZING", "progress": 0.3}),
        ok({"status": "COMPLETE", "suggestions": {}}),
    )

    async def run():
        created = await create_bundle(options, {"a.py": "h-a", "b.py": "h-b"}, executor=executor)
        parent = RemoteBundle.model_validate(created.value)

        upload = {path: {"hash": f"h-{path[0]}", "content": "x = 1\n"} for path in parent.missing_files}
        extended = await extend_bundle(
            options, parent.bundle_hash, upload, removed_files=["c.py"], executor=executor
        )
        child = RemoteBundle.model_validate(extended.value)

        checked = await check_bundle(options, child.bundle_hash, executor=executor)
        analysis = await poll_until_terminal(
            functools.partial(get_analysis, options, child.bundle_hash, executor=executor),
            interval_seconds=0,
        )
        return parent, child, checked, analysis

    parent, child, checked, analysis = asyncio.run(run())

    assert parent.bundle_hash == "parent"
    assert child.bundle_hash == "child"
    assert checked.value["missingFiles"] == []
    assert analysis.value["status"] == "COMPLETE"

    urls = [payload.url for payload in executor.payloads]
    assert urls[1].endswith("/bundle/parent")
    assert urls[2].endswith("/bundle/child")
    delta = decode_and_decompress(executor.payloads[1].body)
    assert set(delta["files"]) == {"b.py"}
    assert delta["removedFiles"] == ["c.py"]
    assert executor.payloads[3].body["key"]["hash"] == "child"
