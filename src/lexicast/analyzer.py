"""
Content analysis with a Gemini multimodal model.
"""

import logging

from google import genai
from google.genai import types

from .errors import AnalysisError
from .models import RemoteAsset
from .retrying import retrying

logger = logging.getLogger("lexicast")

ANALYSIS_PROMPT = """
你是一位资深的语言学家和 AI 技术专家。请完整分析这段音频，并严格输出一个 JSON 对象，结构如下：

{
  "segments": [ { "en": "...", "cn": "...", "start": "MM:SS", "end": "MM:SS" } ],
  "chapters": [ { "title": "...", "start": "MM:SS", "end": "MM:SS" } ],
  "red_list": [ { "word": "...", "pronunciation": "...", "definition_cn": "...", "example": "...", "example_cn": "..." } ],
  "blue_list": [ { "term": "...", "definition_cn": "..." } ]
}

segments (双语字幕):
  - 将完整逐字稿按语义切分为短小的单元，每段 1-2 句话，不要遗漏内容。
  - "en": 英文原文（可修正标点，不要改动原意）；"cn": 地道、流畅的中文翻译。
  - "start" / "end": 该段在音频中的起止时间，格式 MM:SS（超过一小时用 HH:MM:SS）。
  - 各段按时间顺序排列，互不重叠。

chapters (主题章节):
  - 按话题转换划分章节，标题简洁、具体（中文或英文均可）。
  - 第一章从 00:00 开始，最后一章在音频结尾结束。
  - 章节必须首尾相接：每一章的 "start" 等于上一章的 "end"，不能有空隙或重叠。

red_list (高价值英语表达):
  - 只收录 C1/C2 难度的高级词汇，以及母语者常用的习语、固定搭配和口语化隐喻。
  - 不要收录 "use", "good", "make", "problem" 这类简单词。
  - "definition_cn": 解释它在当前语境下的含义和语气，而不仅仅是字典释义。
  - "example": 新写一个自然的英文例句，不要照抄音频原句；"example_cn": 该例句的中文翻译。

blue_list (行业术语):
  - 提取音频所属领域的专业术语、产品名或概念（例如 "Context Window", "RAG", "Inference"）。
  - "definition_cn": 通俗易懂的中文解释。

不要生成全文摘要，不要输出任何解释性文字。

**CRITICAL: Output MUST be a single, valid JSON object. DO NOT wrap it in markdown code fences (like ```json), and DO NOT add any preamble or postscript. Start directly with { and end with }.**
""".strip()


class ContentAnalyzer:
    """Issue the single generation request for a ready remote asset."""

    def __init__(
        self,
        client: genai.Client,
        *,
        model: str = "gemini-2.5-flash",
        prompt: str = ANALYSIS_PROMPT,
        retry_attempts: int = 3,
        retry_backoff: float = 1.0,
    ):
        self.client = client
        self.model = model
        self.prompt = prompt
        self.retry_attempts = retry_attempts
        self.retry_backoff = retry_backoff

    async def analyze(self, asset: RemoteAsset) -> str:
        """Return the raw text response for the audio referenced by ``asset``."""
        logger.info("Step 5: analyzing audio with %s...", self.model)
        contents = [
            types.Part.from_uri(file_uri=asset.uri, mime_type=asset.mime_type),
            self.prompt,
        ]
        try:
            async for attempt in retrying(self.retry_attempts, backoff=self.retry_backoff):
                with attempt:
                    response = await self.client.aio.models.generate_content(
                        model=self.model,
                        contents=contents,
                    )
        except Exception as e:
            raise AnalysisError(f"Content generation failed: {e}") from e

        text = response.text
        if not text or not text.strip():
            raise AnalysisError("Content generation returned an empty response")

        logger.info("Analysis complete (%d characters)", len(text))
        logger.debug("Raw response: %s...", text[:500])
        return text
