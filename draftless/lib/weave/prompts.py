"""
融合提示词模板

同一 (A, B, 策略) 组合生成的提示词逐字节一致：模板为固定文本，
只做字符串拼接替换，不包含时间戳或随机内容。
"""
from typing import Dict

from ...domain.models.weave import MergeStrategy

BLEND_TEMPLATE = """ROLE: You are an expert developmental editor tasked with merging two drafts of the same text into a single, superior version.

OBJECTIVE:
Integrate the plot/action updates from the Incoming Version (B) into the narrative flow of the Current Version (A).

MERGE RULES:
1. RESOLVE STATE CONTRADICTIONS: If Version A describes an object or person in one state and Version B describes them in a mutually exclusive state, rewrite the timeline so the transition from A's state to B's state happens on the page. Never present both states as simultaneously true.
2. PRIORITIZE RECENT ACTION: Version B represents the writer's latest intent. If facts or actions conflict, Version B wins.
3. PRESERVE VOICE: Keep the vocabulary, sentence structure, setting and tone of Version A.
4. SEAMLESS BLEND: Do not paste B after A. Rewrite the sentences so they interlock.

INPUT DATA:
[Version A (Current Draft)]:
<<<
{text_a}
>>>
[Version B (Incoming Checkpoint)]:
<<<
{text_b}
>>>

OUTPUT:
Return ONLY the merged text. No markdown, no comments."""

RESTYLE_TEMPLATE = """ROLE: You are a ghostwriter.

TASK: Rewrite the content of Version B so that it matches the exact writing style of Version A.

INSTRUCTIONS:
1. Analyze Version A for sentence length, vocabulary complexity and emotional tone.
2. Analyze Version B for its core facts, plot points and data.
3. Produce a new text that conveys every fact of B in the voice of A. Do not add or drop facts.

INPUT DATA:
[Style Reference (Version A)]:
<<<
{text_a}
>>>
[Content Source (Version B)]:
<<<
{text_b}
>>>

OUTPUT:
Return ONLY the rewritten text."""

BRIDGE_TEMPLATE = """ROLE: You are a continuity editor.

TASK: Append Part 2 to the end of Part 1.

INSTRUCTIONS:
1. Identify the ending state of Part 1 and the starting state of Part 2.
2. If there is a jump in time, location or logic, insert one or two bridging sentences between them.
3. If they already fit, concatenate them unchanged.
4. Do not edit the text of either part.

INPUT DATA:
[Part 1]:
<<<
{text_a}
>>>
[Part 2]:
<<<
{text_b}
>>>

OUTPUT:
Return the full combined text (Part 1 + optional bridge + Part 2)."""

TEMPLATES: Dict[MergeStrategy, str] = {
    MergeStrategy.BLEND: BLEND_TEMPLATE,
    MergeStrategy.RESTYLE: RESTYLE_TEMPLATE,
    MergeStrategy.BRIDGE: BRIDGE_TEMPLATE,
}


def build_prompt(text_a: str, text_b: str, strategy: MergeStrategy) -> str:
    """为给定策略构建提示词"""
    template = TEMPLATES[MergeStrategy(strategy)]
    # 不使用 str.format：草稿文本中可能包含花括号
    head, rest = template.split("{text_a}", 1)
    middle, tail = rest.split("{text_b}", 1)
    return f"{head}{text_a}{middle}{text_b}{tail}"
