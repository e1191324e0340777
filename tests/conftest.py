import random

import pytest

from abifuzz.config import GeneratorConfig, MutationConfig
from abifuzz.generator import MutatingValueGenerator, RandomValueGenerator
from abifuzz.value_set import ValueSet


@pytest.fixture
def rng():
    return random.Random(1337)


@pytest.fixture
def generator_config():
    return GeneratorConfig(
        array_min_length=3,
        array_max_length=10,
        bytes_min_length=5,
        bytes_max_length=200,
        string_min_length=5,
        string_max_length=200,
    )


@pytest.fixture
def random_generator(generator_config, rng):
    return RandomValueGenerator(generator_config, rng)


@pytest.fixture
def mutation_config():
    return MutationConfig(
        generator=GeneratorConfig(
            array_min_length=0,
            array_max_length=100,
            bytes_min_length=0,
            bytes_max_length=100,
            string_min_length=0,
            string_max_length=100,
        ),
        min_rounds=0,
        max_rounds=1,
        address_bias=0.5,
        integer_bias=0.5,
        string_bias=0.5,
        bytes_bias=0.5,
    )


@pytest.fixture
def value_set():
    return ValueSet()


@pytest.fixture
def mutating_generator(mutation_config, value_set, rng):
    return MutatingValueGenerator(mutation_config, value_set, rng)


@pytest.fixture
def make_mutating_generator(value_set):
    # builds a generator from MutationConfig keyword overrides
    def fn(seed=0, **kwargs):
        return MutatingValueGenerator(
            MutationConfig(**kwargs), value_set, random.Random(seed)
        )

    return fn
