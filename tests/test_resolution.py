"""Tests for provider and processor descriptor resolution."""

import collections as _collections
import functools as _functools

import pytest as _pytest

import config_aggregator.errors as errors
import config_aggregator.resolution as resolution


class TestImportString:
    """Tests for import_string()."""

    def test_colon_form(self) -> None:
        assert resolution.import_string("collections:OrderedDict") is _collections.OrderedDict

    def test_dotted_form(self) -> None:
        assert resolution.import_string("collections.OrderedDict") is _collections.OrderedDict

    def test_nested_attribute(self) -> None:
        assert resolution.import_string("collections:OrderedDict.fromkeys") == (
            _collections.OrderedDict.fromkeys
        )

    def test_bare_name_raises(self) -> None:
        with _pytest.raises(ImportError):
            resolution.import_string("NonExistentConfigProvider")

    def test_missing_attribute_raises(self) -> None:
        with _pytest.raises(AttributeError):
            resolution.import_string("collections:NoSuchThing")


class TestResolveProvider:
    """Tests for resolve_provider()."""

    def test_callable_returned_as_is(self) -> None:
        def provider() -> dict[str, str]:
            return {"foo": "bar"}

        assert resolution.resolve_provider(provider) is provider

    def test_named_class_is_instantiated(self) -> None:
        provider = resolution.resolve_provider("tests.resources:FooConfigProvider")
        assert provider() == {"foo": "bar"}

    def test_class_object_is_instantiated(self) -> None:
        import tests.resources as resources

        provider = resolution.resolve_provider(resources.BarConfigProvider)
        assert isinstance(provider, resources.BarConfigProvider)

    def test_named_function(self) -> None:
        provider = resolution.resolve_provider("tests.resources.generator_provider")
        assert list(provider()) == [{"foo": "bar"}, {"baz": "bat"}]

    def test_nonexistent_name_raises(self) -> None:
        with _pytest.raises(errors.InvalidProviderError, match="cannot be found"):
            resolution.resolve_provider("NonExistentConfigProvider")

    def test_nonexistent_module_raises(self) -> None:
        with _pytest.raises(errors.InvalidProviderError) as exc_info:
            resolution.resolve_provider("no_such_package.module:Provider")
        assert isinstance(exc_info.value.__cause__, ImportError)

    def test_non_callable_instance_raises(self) -> None:
        with _pytest.raises(errors.InvalidProviderError, match="NotCallable"):
            resolution.resolve_provider("tests.resources:NotCallable")

    def test_non_callable_value_raises(self) -> None:
        with _pytest.raises(errors.InvalidProviderError):
            resolution.resolve_provider("tests.resources:NOT_A_PROVIDER")

    def test_class_requiring_arguments_raises(self) -> None:
        with _pytest.raises(errors.InvalidProviderError):
            resolution.resolve_provider("config_aggregator.providers:ArrayProvider")

    def test_builtin_object_is_not_a_provider(self) -> None:
        with _pytest.raises(errors.InvalidProviderError):
            resolution.resolve_provider("builtins.object")


class TestResolveProcessor:
    """Tests for resolve_processor()."""

    def test_named_class_is_instantiated(self) -> None:
        processor = resolution.resolve_processor("tests.resources:FooPostProcessor")
        assert processor({"a": 1}) == {"a": 1, "post-processed": True}

    def test_nonexistent_name_raises(self) -> None:
        with _pytest.raises(errors.InvalidProcessorError, match="cannot be found"):
            resolution.resolve_processor("NonExistentConfigProcessor")

    def test_non_callable_raises(self) -> None:
        with _pytest.raises(errors.InvalidProcessorError, match="not callable"):
            resolution.resolve_processor("builtins.object")

    def test_processor_errors_are_not_provider_errors(self) -> None:
        with _pytest.raises(errors.InvalidProcessorError) as exc_info:
            resolution.resolve_processor("NonExistentConfigProcessor")
        assert not isinstance(exc_info.value, errors.InvalidProviderError)


class TestDescribe:
    """Tests for describe()."""

    def test_function(self) -> None:
        def my_provider() -> dict[str, str]:
            return {}

        assert resolution.describe(my_provider).endswith("my_provider")

    def test_lambda(self) -> None:
        assert resolution.describe(lambda: {}).endswith("<lambda>")

    def test_callable_instance_uses_class_name(self) -> None:
        assert resolution.describe(
            resolution.resolve_provider("tests.resources:FooConfigProvider")
        ) == "tests.resources.FooConfigProvider"

    def test_partial(self) -> None:
        assert resolution.describe(_functools.partial(dict, a=1)) == "functools.partial"
