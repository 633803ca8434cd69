"""
Draftless - 本地优先写作工作室的草稿版本与编译引擎
"""

__version__ = "0.1.0"
