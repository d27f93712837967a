# livemap/web_client/__init__.py
"""
Клиентская часть: страница карты, репортёр геолокации и рендерер маркеров.
"""
