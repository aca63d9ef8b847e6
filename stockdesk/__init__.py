"""StockDesk：股票瀏覽、登入與購買客戶端"""

__version__ = "0.1.0"
