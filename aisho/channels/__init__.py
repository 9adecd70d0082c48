"""聊天平台客户端模块。"""
