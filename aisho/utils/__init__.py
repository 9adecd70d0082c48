"""实用工具模块。"""
