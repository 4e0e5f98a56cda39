import asyncio
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from fitcoach.ai_client import TextGenerator
from fitcoach.exceptions import AIProviderError, GenerationTimeoutError, NormalizationError
from fitcoach.generators import MealPlanGenerator, WorkoutGenerator

from .conftest import StubGenerator


class FakeResponses:
    def __init__(self, output_text="", error=None, delay=0.0):
        self.output_text = output_text
        self.error = error
        self.delay = delay
        self.params = None

    async def create(self, **params):
        self.params = params
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(output_text=self.output_text)


def make_generator(**kwargs):
    responses = FakeResponses(**kwargs)
    return TextGenerator(client=SimpleNamespace(responses=responses), model="test-model"), responses


def test_generate_returns_text():
    generator, responses = make_generator(output_text='{"ok": true}')
    assert asyncio.run(generator.generate("hello", temperature=0.7)) == '{"ok": true}'
    assert responses.params == {"model": "test-model", "input": "hello", "temperature": 0.7}


def test_temperature_is_optional():
    generator, responses = make_generator(output_text="hi")
    asyncio.run(generator.generate("hello"))
    assert "temperature" not in responses.params


def test_timeout():
    generator, _ = make_generator(output_text="late", delay=0.5)
    with pytest.raises(GenerationTimeoutError):
        asyncio.run(generator.generate("hello", timeout=0.01))


def test_provider_error():
    generator, _ = make_generator(error=OpenAIError("quota exceeded"))
    with pytest.raises(AIProviderError) as exc:
        asyncio.run(generator.generate("hello"))
    assert "quota exceeded" in str(exc.value)


def test_blank_output_is_an_error():
    generator, _ = make_generator(output_text="   ")
    with pytest.raises(AIProviderError):
        asyncio.run(generator.generate("hello"))


def test_generator_failure_carries_endpoint_message():
    ai = StubGenerator('{"name": "Empty", "exercises": []}')
    with pytest.raises(NormalizationError) as exc:
        asyncio.run(WorkoutGenerator(ai).generate())
    assert exc.value.to_dict() == {"error": "Failed to generate workout plan"}


def test_meal_plan_generator_defaults():
    prompt = MealPlanGenerator(StubGenerator()).build_prompt(profile=None)
    assert "Target Calories: 2000" in prompt
    assert "Meals: 3" in prompt
    assert "150g protein, 200g carbs, 67g fat" in prompt
