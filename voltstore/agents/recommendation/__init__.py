"""
Kit Recommendation - single-shot LLM architecture

This module contains the prompt templates for the Gemini-based kit
recommendation client.

The client and its response validation live in:
- voltstore/services/ai_recommendation_service.py
"""

from voltstore.agents.recommendation.prompts import (
    KIT_RECOMMENDATION_SYSTEM_PROMPT,
    build_inventory_context,
    build_kit_recommendation_user_prompt,
)

__all__ = [
    "KIT_RECOMMENDATION_SYSTEM_PROMPT",
    "build_inventory_context",
    "build_kit_recommendation_user_prompt",
]
