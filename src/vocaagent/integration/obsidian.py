"""Obsidian 笔记导出."""

import logging
import re
from datetime import date
from pathlib import Path

from vocaagent.errors import ConfigError
from vocaagent.models.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

VOCABULARY_TEMPLATE = """---
tag: #toefl #voca
date: {today}
source: {article_url}
---
# {word}
**Definition:** {definition}

> {context_sentence}

[在 YouGlish 上听发音](https://youglish.com/pronounce/{word}/english?)
"""


def safe_filename(word: str) -> str:
    """只保留字母数字、连字符和下划线."""
    safe = re.sub(r"[^\w-]", "", word)
    return safe or "untitled"


class MarkdownExporter:
    """每个词汇导出为一篇 Markdown 笔记."""

    def __init__(self, vault_path: Path) -> None:
        self.output_path = Path(vault_path)

    def render(self, vocab: Vocabulary, today: date | None = None) -> str:
        """渲染笔记内容."""
        today = today or date.today()
        return VOCABULARY_TEMPLATE.format(
            today=today.isoformat(),
            article_url=vocab.source_url,
            word=vocab.word,
            definition=vocab.definition,
            context_sentence=vocab.context_sentence,
        )

    def export(self, vocab: Vocabulary) -> Path:
        """写入单个词汇笔记，返回文件路径."""
        file_path = self.output_path / f"{safe_filename(vocab.word)}.md"
        file_path.write_text(self.render(vocab), encoding="utf-8")
        logger.debug(f"已导出: {vocab.word} -> {file_path}")
        return file_path

    def export_batch(self, vocabs: list[Vocabulary]) -> list[Path]:
        """批量导出，返回实际写入的文件（同名笔记只计一次，后写入者覆盖）."""
        try:
            self.output_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"无法创建导出目录 {self.output_path}: {e}"
            raise ConfigError(msg) from e

        paths: list[Path] = []
        for vocab in vocabs:
            path = self.export(vocab)
            if path in paths:
                logger.warning(f"同名笔记被覆盖: {path.name} ({vocab.word})")
                continue
            paths.append(path)

        logger.info(f"已导出 {len(paths)} 篇笔记到 {self.output_path}")
        return paths
