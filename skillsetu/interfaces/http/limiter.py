from slowapi import Limiter
from slowapi.util import get_remote_address

# Один общий экземпляр: роутеры вешают лимиты, main.py подключает обработчик 429
limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")
