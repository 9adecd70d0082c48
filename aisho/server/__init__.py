"""HTTP 服务模块。"""
