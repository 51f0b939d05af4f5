"""正文提取器."""

import asyncio
import re
from concurrent.futures import ThreadPoolExecutor

from trafilatura import extract

from vocaagent.utils.html_parser import extract_main_content


class BodyExtractor:
    """使用 trafilatura 提取网页正文，失败时回退到 BeautifulSoup."""

    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers)

    async def extract_text(self, html: str | bytes) -> str:
        """
        从 HTML 提取纯文本，bytes 输入由 trafilatura 识别编码.

        trafilatura 是同步库，这里用线程池包装成异步。
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._extract_sync, html)

    def close(self) -> None:
        """关闭线程池."""
        self._executor.shutdown(wait=False)

    def _extract_sync(self, html: str | bytes) -> str:
        """同步提取正文."""
        if not html:
            return ""

        text = extract(
            html,
            include_comments=False,
            include_tables=True,
            output_format="txt",
            favor_precision=False,
        )
        if text:
            return self._clean_text(text)

        # trafilatura 没有结果时按常见容器提取
        return extract_main_content(html)

    def _clean_text(self, text: str) -> str:
        """清理纯文本内容."""
        # 移除多余空行
        text = re.sub(r"\n{3,}", "\n\n", text)
        # 移除行首尾空白
        lines = [line.strip() for line in text.split("\n")]
        text = "\n".join(lines)
        # 移除常见的无效字符
        text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f]", "", text)
        return text.strip()
