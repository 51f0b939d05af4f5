"""VocaAgent: 从订阅源收集高阶英语词汇."""

__version__ = "0.1.0"
