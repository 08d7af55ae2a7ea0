"""
Helpers for cleaning raw LLM text before JSON parsing.
"""

import re


def strip_code_fences(content: str) -> str:
    """
    Remove Markdown code fences around a JSON payload.

    Handles ```json ... ```, bare ``` ... ``` and leading prose before
    the first "{".
    """
    json_content = content.strip()

    # Look for ```json ... ``` pattern anywhere in the response
    json_block_match = re.search(r'```json\s*([\s\S]*?)```', json_content, re.IGNORECASE)
    if json_block_match:
        return json_block_match.group(1).strip()

    # Try ``` ... ``` pattern
    code_block_match = re.search(r'```\s*([\s\S]*?)```', json_content)
    if code_block_match:
        return code_block_match.group(1).strip()

    # No code blocks - try to find raw JSON (starting with {)
    json_start = json_content.find('{')
    if json_start > 0:
        json_content = json_content[json_start:]

    return json_content
