"""Tests for pipeline.stream_merge."""
import json
from typing import Any, Iterator

import pytest
import requests

from data_model.events import StepKind, StreamEvent
from pipeline.client import PipelineError
from pipeline.stream_merge import StreamMergeController, classify_step


class FakeTarget:
    def __init__(self) -> None:
        self.suggestion: str | None = None
        self.active_tree: str | None = None
        self.files: dict[str, str] = {}
        self.lines: list[tuple[str, str]] = []

    def log(self, sender: str, message: str) -> None:
        self.lines.append((sender, message))

    def upsert(self, name: str, content: str) -> None:
        self.files[name] = content


class FakeStream:
    def __init__(self, messages: list[str], fail_after: int | None = None) -> None:
        self.messages = messages
        self.fail_after = fail_after
        self.close_calls = 0

    def __iter__(self) -> Iterator[str]:
        for i, raw in enumerate(self.messages):
            if self.fail_after is not None and i >= self.fail_after:
                raise requests.ConnectionError("connection reset")
            yield raw

    def close(self) -> None:
        self.close_calls += 1


class FakeResults:
    def __init__(self, snapshot: dict[str, Any] | None = None, error: bool = False) -> None:
        self.snapshot = snapshot or {}
        self.error = error
        self.calls: list[str] = []

    def fetch_results(self, file_path: str) -> dict[str, Any]:
        self.calls.append(file_path)
        if self.error:
            raise PipelineError("HTTP 500")
        return self.snapshot


def _msg(step: int, name: str, content: Any = None) -> str:
    payload: dict[str, Any] = {"step": step, "name": name}
    if content is not None:
        payload["content"] = content
    return json.dumps(payload)


class TestClassifyStep:
    @pytest.mark.parametrize(
        "name",
        ["audit", "globalCheck", "global_check", "editPass2", "suggestion"],
    )
    def test_suggestion_steps(self, name: str) -> None:
        assert classify_step(StreamEvent(1, name)) == {StepKind.SUGGESTION}

    @pytest.mark.parametrize("name", ["split", "build", "fuse", "split_tree"])
    def test_tree_steps(self, name: str) -> None:
        assert classify_step(StreamEvent(1, name)) == {StepKind.TREE}

    def test_edit_pass_one_is_log_only(self) -> None:
        assert classify_step(StreamEvent(4, "editPass1")) == frozenset()

    def test_finalize_by_name_or_step(self) -> None:
        assert classify_step(StreamEvent(7, "finalize")) == {StepKind.FINAL}
        assert StepKind.FINAL in classify_step(StreamEvent(7, "wrap"), final_step=7)
        assert classify_step(StreamEvent(6, "wrap"), final_step=7) == frozenset()

    def test_explicit_kind_wins(self) -> None:
        event = StreamEvent(2, "split_tree", kind=StepKind.SUGGESTION)
        assert classify_step(event) == {StepKind.SUGGESTION}
        assert classify_step(StreamEvent(2, "audit", kind=StepKind.LOG)) == frozenset()


class TestOnEvent:
    def test_tree_scenario(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        ctl.open(FakeStream([]), "paper")
        ctl.on_event(StreamEvent(step=3, name="split_tree", content='{"a":1}'))

        assert target.files["paper.tree.json"] == '{\n  "a": 1\n}'
        assert target.active_tree == "paper.tree.json"
        assert target.lines == [("ai", '[3] split_tree: {"a":1}')]

    def test_invalid_tree_json_ignored(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        ctl.on_event(StreamEvent(1, "build", "not json"))
        assert target.files == {}
        assert target.active_tree is None
        assert len(target.lines) == 1

    def test_structured_tree_content(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        ctl.open(FakeStream([]), "p")
        ctl.on_event(StreamEvent(1, "fuse", {"sections": ["Abstract"]}))
        assert json.loads(target.files["p.tree.json"]) == {"sections": ["Abstract"]}

    def test_suggestion_persisted(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        ctl.open(FakeStream([]), "paper")
        ctl.on_event(StreamEvent(5, "audit", "Tighten the abstract."))
        assert target.suggestion == "Tighten the abstract."
        assert target.files == {"paper.suggestion.txt": "Tighten the abstract."}

    def test_structured_suggestion_unwrapped(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        ctl.open(FakeStream([]), "paper")
        ctl.on_event(StreamEvent(5, "audit", {"suggestion": "Shorter.", "details": "…"}))
        assert target.suggestion == "Shorter."

    def test_log_preview_truncated(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target, preview_chars=10)
        ctl.on_event(StreamEvent(0, "split", "x" * 50))
        assert target.lines[0][1] == "[0] split: " + "x" * 10 + "…"

    def test_event_without_content(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        ctl.on_event(StreamEvent(2, "editPass1"))
        assert target.lines == [("ai", "[2] editPass1")]


class TestRun:
    def test_full_stream_with_single_finalize(self) -> None:
        target = FakeTarget()
        results = FakeResults({"suggestion": "final suggestion", "tree": {"b": 2}})
        stream = FakeStream([
            _msg(0, "split", '{"a": 1}'),
            _msg(3, "audit", "first suggestion"),
            "plain text that is not json",
            _msg(7, "finalize", {"finalText": "done"}),
            _msg(8, "finalize"),
        ])
        ctl = StreamMergeController(target, results=results)
        ctl.run(stream, "paper", "/srv/paper.txt")

        assert results.calls == ["/srv/paper.txt"]
        assert target.suggestion == "final suggestion"
        assert json.loads(target.files["paper.tree.json"]) == {"b": 2}
        assert ("ai", "plain text that is not json") in target.lines
        assert not ctl.in_progress
        assert stream.close_calls == 1
        assert not any(line.startswith("[8]") for _s, line in target.lines)

    def test_transport_error_closes_without_retry(self) -> None:
        target = FakeTarget()
        stream = FakeStream([_msg(0, "split"), _msg(1, "build")], fail_after=1)
        ctl = StreamMergeController(target)
        ctl.run(stream, "paper")

        assert not ctl.in_progress
        assert stream.close_calls == 1
        assert target.lines[-1][0] == "system"
        assert "connection reset" in target.lines[-1][1]

    def test_stream_ending_without_finalize(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        ctl.run(FakeStream([_msg(0, "split")]), "paper")
        assert not ctl.in_progress
        assert target.lines[-1][0] == "system"

    def test_results_failure_is_logged_and_stream_closed(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target, results=FakeResults(error=True))
        ctl.run(FakeStream([_msg(1, "finalize")]), "paper", "/srv/p")
        assert not ctl.in_progress
        assert any("HTTP 500" in line for _s, line in target.lines)

    def test_open_closes_previous_stream(self) -> None:
        target = FakeTarget()
        ctl = StreamMergeController(target)
        first, second = FakeStream([]), FakeStream([])
        ctl.open(first, "a")
        ctl.open(second, "b")
        assert first.close_calls == 1
        assert second.close_calls == 0
        assert ctl.in_progress
        ctl.close()
        assert second.close_calls == 1
        assert not ctl.in_progress

    def test_finalize_once_per_stream_lifetime(self) -> None:
        target = FakeTarget()
        results = FakeResults({})
        ctl = StreamMergeController(target, results=results)
        ctl.run(FakeStream([_msg(1, "finalize")]), "a", "/p1")
        ctl.run(FakeStream([_msg(1, "finalize")]), "a", "/p2")
        assert results.calls == ["/p1", "/p2"]
