"""内置静态数据。"""
