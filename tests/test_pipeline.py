"""Tests for the provider and post-processor pipelines."""

import typing as _typing

import pytest as _pytest

import config_aggregator.errors as errors
import config_aggregator.merge as merge
import config_aggregator.pipeline as pipeline


class TestLoadFromProviders:
    """Tests for load_from_providers()."""

    def test_no_providers_gives_empty_tree(self) -> None:
        assert pipeline.load_from_providers([]) == {}

    def test_merges_in_order(self) -> None:
        result = pipeline.load_from_providers(
            [lambda: {"foo": "bar"}, lambda: {"bar": "bat"}]
        )
        assert result == {"foo": "bar", "bar": "bat"}

    def test_later_provider_wins(self) -> None:
        first = lambda: {"color": "red"}  # noqa: E731
        second = lambda: {"color": "blue"}  # noqa: E731

        assert pipeline.load_from_providers([first, second]) == {"color": "blue"}
        assert pipeline.load_from_providers([second, first]) == {"color": "red"}

    def test_generator_fragments_merged_in_yield_order(self) -> None:
        def provider() -> _typing.Iterator[dict[str, _typing.Any]]:
            yield {"foo": "bar"}
            yield {"baz": "bat"}
            yield {"foo": "override"}

        assert pipeline.load_from_providers([provider]) == {"foo": "override", "baz": "bat"}

    def test_generator_is_consumed_lazily(self) -> None:
        """An invalid fragment fails before later fragments are produced."""
        produced: list[str] = []

        def provider() -> _typing.Iterator[_typing.Any]:
            produced.append("first")
            yield "not a tree"
            produced.append("second")
            yield {"b": 2}

        with _pytest.raises(errors.ProviderReturnedInvalidConfigError):
            pipeline.load_from_providers([provider])
        assert produced == ["first"]

    def test_plain_iterator_is_drained(self) -> None:
        assert pipeline.load_from_providers([lambda: iter([{"a": 1}, {"b": 2}])]) == {
            "a": 1,
            "b": 2,
        }

    def test_directives_across_providers(self) -> None:
        result = pipeline.load_from_providers(
            [
                lambda: {"db": {"host": "h", "pw": "x"}, "plugins": ["a"]},
                lambda: {"db": {"pw": merge.REMOVE}, "plugins": merge.Replace(["b"])},
            ]
        )
        assert result == {"db": {"host": "h"}, "plugins": ["b"]}

    def test_each_provider_invoked_once(self) -> None:
        calls: list[str] = []

        def provider() -> dict[str, str]:
            calls.append("called")
            return {"a": "b"}

        pipeline.load_from_providers([provider])
        assert calls == ["called"]

    def test_provider_output_not_modified(self) -> None:
        shared = {"nested": {"a": 1}}

        pipeline.load_from_providers([lambda: shared, lambda: {"nested": {"b": 2}}])

        assert shared == {"nested": {"a": 1}}

    def test_non_mapping_return_raises(self) -> None:
        def broken() -> list[str]:
            return ["not", "a", "tree"]

        with _pytest.raises(errors.ProviderReturnedInvalidConfigError) as exc_info:
            pipeline.load_from_providers([broken])

        assert exc_info.value.provider_name.endswith("broken")
        assert exc_info.value.value_type == "list"
        assert "does not return a mapping" in str(exc_info.value)

    def test_non_mapping_yield_raises(self) -> None:
        def broken() -> _typing.Iterator[_typing.Any]:
            yield {"a": 1}
            yield "oops"

        with _pytest.raises(errors.ProviderReturnedInvalidConfigError, match="str"):
            pipeline.load_from_providers([broken])

    def test_invalid_config_is_a_provider_error(self) -> None:
        with _pytest.raises(errors.InvalidProviderError):
            pipeline.load_from_providers([lambda: None])

    def test_unresolvable_provider_raises_before_merging(self) -> None:
        calls: list[str] = []

        def provider() -> dict[str, str]:
            calls.append("called")
            return {}

        with _pytest.raises(errors.InvalidProviderError):
            pipeline.load_from_providers([provider, "NonExistentConfigProvider"])
        assert calls == ["called"]

    def test_named_providers(self) -> None:
        result = pipeline.load_from_providers(
            ["tests.resources:FooConfigProvider", "tests.resources:BarConfigProvider"]
        )
        assert result == {"foo": "bar", "bar": "bat"}


class TestPostProcess:
    """Tests for post_process()."""

    def test_no_processors_returns_input(self) -> None:
        config = {"a": 1}
        assert pipeline.post_process([], config) is config

    def test_left_fold(self) -> None:
        def add_b(config: dict[str, _typing.Any]) -> dict[str, _typing.Any]:
            return {**config, "b": config["a"] + 1}

        def add_c(config: dict[str, _typing.Any]) -> dict[str, _typing.Any]:
            return {**config, "c": config["b"] + 1}

        assert pipeline.post_process([add_b, add_c], {"a": 1}) == {"a": 1, "b": 2, "c": 3}

    def test_processor_output_not_validated(self) -> None:
        assert pipeline.post_process([lambda config: "anything"], {}) == "anything"

    def test_processor_exception_propagates(self) -> None:
        def failing(config: dict[str, _typing.Any]) -> dict[str, _typing.Any]:
            raise RuntimeError("processor failed")

        with _pytest.raises(RuntimeError, match="processor failed"):
            pipeline.post_process([failing], {})

    def test_named_processor(self) -> None:
        result = pipeline.post_process(["tests.resources.FooPostProcessor"], {"foo": "bar"})
        assert result == {"foo": "bar", "post-processed": True}

    def test_unresolvable_processor_raises(self) -> None:
        with _pytest.raises(errors.InvalidProcessorError):
            pipeline.post_process(["NonExistentConfigProcessor"], {})
