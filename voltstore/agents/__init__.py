"""
Prompt templates for the generation service.

- recommendation: kit design prompts for the AI recommendation client
- rates: exchange-rate quote prompts for the rate cache
"""
