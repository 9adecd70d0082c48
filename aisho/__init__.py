"""
aisho - LINE 聊天记录相性诊断机器人
"""

__version__ = "0.1.0"
__logo__ = "💞"
