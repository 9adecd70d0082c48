"""消息总线事件模块。"""
