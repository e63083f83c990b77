import pytest
from pydantic import ValidationError

from petals_api_client.models import Model
from petals_api_client.params import (
    GenerateParams,
    GenerateParamsBuilder,
    has_length_bound,
)


class TestHasLengthBound:
    """Test cases for the length bound check"""

    @pytest.mark.parametrize(
        "max_length, max_new_tokens, expected",
        [
            (None, None, False),
            (100, None, True),
            (None, 20, True),
            (100, 20, True),
            (0, None, True),
        ],
    )
    def test_has_length_bound(self, max_length, max_new_tokens, expected):
        """Test that either limit satisfies the check"""
        assert has_length_bound(max_length, max_new_tokens) is expected


class TestGenerateParamsBuilder:
    """Test cases for GenerateParamsBuilder"""

    def test_build_without_length_bound_returns_none(self):
        """Test that a builder with neither limit produces no parameters"""
        builder = (
            GenerateParamsBuilder()
            .model(Model.BLOOMZ)
            .inputs("Hello")
            .do_sample(True)
            .temperature(0.7)
            .top_k(40)
            .top_p(0.9)
            .stop_sequence("</s>")
        )
        assert builder.build() is None

    def test_empty_builder_returns_none(self):
        """Test that an untouched builder produces no parameters"""
        assert GenerateParamsBuilder().build() is None

    def test_build_with_max_length(self):
        """Test that max_length alone is enough"""
        params = GenerateParamsBuilder().max_length(100).build()
        assert isinstance(params, GenerateParams)
        assert params.max_length == 100
        assert params.max_new_tokens is None

    def test_build_with_max_new_tokens(self):
        """Test that max_new_tokens alone is enough"""
        params = GenerateParamsBuilder().max_new_tokens(20).build()
        assert params is not None
        assert params.max_new_tokens == 20
        assert params.max_length is None

    def test_build_preserves_every_field(self):
        """Test that all set fields survive build unchanged"""
        params = (
            GenerateParamsBuilder()
            .model(Model.STABLE_BELUGA_2)
            .inputs("A cat sat on")
            .do_sample(True)
            .temperature(0.6)
            .top_k(50)
            .top_p(0.95)
            .max_length(256)
            .max_new_tokens(32)
            .stop_sequence("\n")
            .build()
        )
        assert params == GenerateParams(
            model=Model.STABLE_BELUGA_2,
            inputs="A cat sat on",
            do_sample=True,
            temperature=0.6,
            top_k=50,
            top_p=0.95,
            max_length=256,
            max_new_tokens=32,
            stop_sequence="\n",
        )

    def test_last_write_wins(self):
        """Test that setting a field twice keeps the last value"""
        params = (
            GenerateParamsBuilder()
            .inputs("first")
            .max_new_tokens(5)
            .inputs("second")
            .max_new_tokens(10)
            .build()
        )
        assert params.inputs == "second"
        assert params.max_new_tokens == 10

    def test_setter_order_does_not_matter(self):
        """Test that the same fields set in a different order build equal parameters"""
        first = (
            GenerateParamsBuilder().inputs("Hi").temperature(0.5).max_length(64).build()
        )
        second = (
            GenerateParamsBuilder().max_length(64).temperature(0.5).inputs("Hi").build()
        )
        assert first == second

    def test_setters_return_builder(self):
        """Test that every setter returns the builder for chaining"""
        builder = GenerateParamsBuilder()
        assert builder.model(Model.BLOOMZ) is builder
        assert builder.inputs("x") is builder
        assert builder.do_sample(False) is builder
        assert builder.temperature(1.0) is builder
        assert builder.top_k(1) is builder
        assert builder.top_p(1.0) is builder
        assert builder.max_length(1) is builder
        assert builder.max_new_tokens(1) is builder
        assert builder.stop_sequence("x") is builder


class TestGenerateParams:
    """Test cases for GenerateParams"""

    def test_direct_construction_requires_length_bound(self):
        """Test that parameters without a length limit cannot be constructed"""
        with pytest.raises(ValidationError, match="max_length or max_new_tokens"):
            GenerateParams(inputs="Hello")

    def test_is_immutable(self):
        """Test that built parameters cannot be modified"""
        params = GenerateParams(max_new_tokens=20)
        with pytest.raises(ValidationError):
            params.max_new_tokens = 30

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_rejects_non_finite_sampling_values(self, value):
        """Test that temperature and top_p must be finite numbers"""
        with pytest.raises(ValidationError):
            GenerateParamsBuilder().temperature(value).max_new_tokens(5).build()
        with pytest.raises(ValidationError):
            GenerateParams(top_p=value, max_new_tokens=5)

    def test_rejects_negative_lengths(self):
        """Test that lengths must be non-negative"""
        with pytest.raises(ValidationError):
            GenerateParams(max_length=-1)

    def test_accepts_wire_model_name(self):
        """Test that a model can be given by its wire identifier"""
        params = GenerateParams(model="bigscience/bloomz", max_length=10)
        assert params.model is Model.BLOOMZ
