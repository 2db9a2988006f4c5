"""Provider implementations."""

from linguaspark.ai.providers.base import AIModel, GenerationParams, ModelResponse, Provider, SimpleModelResponse
from linguaspark.ai.providers.guarded import GuardedModel

__all__ = ["AIModel", "GenerationParams", "GuardedModel", "ModelResponse", "Provider", "SimpleModelResponse"]
