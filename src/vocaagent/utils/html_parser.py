"""HTML 解析工具."""

from bs4 import BeautifulSoup

# 按优先级尝试的正文容器
MAIN_CONTENT_SELECTORS = [
    "article",
    "main",
    '[role="main"]',
    ".content",
    ".post-content",
    "body",
]


def extract_main_content(html: str | bytes) -> str:
    """
    提取 HTML 中的主要正文，合并多余空白.

    Args:
        html: HTML 内容（bytes 时按 meta 声明识别编码）

    Returns:
        正文纯文本，找不到时返回空字符串
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")

    # 移除非正文标签
    for element in soup(["script", "style", "noscript"]):
        element.decompose()

    for selector in MAIN_CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = " ".join(element.get_text(separator=" ").split())
        if text:
            return text

    return ""
