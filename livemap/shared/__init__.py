# livemap/shared/__init__.py
"""
Общий код клиента и сервера: модели сообщений.
"""
