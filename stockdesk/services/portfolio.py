"""
投資組合服務層

將用戶的多筆持股紀錄依股票 ID 合併，計算數量與總值，並組成投資組合畫面資料。
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from stockdesk.schemas.portfolio import PortfolioPosition, PortfolioSummary, PortfolioView
from stockdesk.schemas.stock import Holding
from stockdesk.services.locale import LocaleStore
from stockdesk.services.session import SessionStore

logger = logging.getLogger(__name__)


def _to_decimal(value: float | None) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def aggregate_holdings(holdings: Iterable[Holding]) -> PortfolioSummary:
    """
    依股票 ID 合併持股紀錄

    邏輯：
    1. 沒有 ID 的紀錄直接略過
    2. 同 ID 的數量加總，總值加總 (單價 × 數量)
    3. 名稱、代號、單價等顯示資料取最後處理到的那筆
    4. 合併後順序依各 ID 第一次出現的順序
    """
    positions: dict[str, PortfolioPosition] = {}

    for holding in holdings:
        stock_id = holding.id
        if not stock_id:
            continue

        unit_price = _to_decimal(holding.unit_price)
        value = unit_price * holding.quantity
        existing = positions.get(stock_id)
        quantity = holding.quantity
        if existing:
            quantity += existing.quantity
            value += existing.total_value

        positions[stock_id] = PortfolioPosition(
            stock_id=stock_id,
            stock_name=holding.stock_name,
            stock_short_name=holding.stock_short_name,
            quantity=quantity,
            unit_price=unit_price,
            total_value=value,
            buy_at=holding.buy_at,
        )

    merged = list(positions.values())
    return PortfolioSummary(
        positions=merged,
        total_value=sum((p.total_value for p in merged), Decimal("0")),
        total_shares=sum(p.quantity for p in merged),
    )


def build_portfolio_view(session: SessionStore, locale: LocaleStore) -> PortfolioView:
    """組成投資組合畫面資料（載入中 / 需登入 / 空 / 正常）"""
    if session.loading:
        return PortfolioView(
            status="loading",
            message=locale.format("portfolio.loading", default="投資組合載入中..."),
        )

    user = session.user
    if user is None:
        return PortfolioView(
            status="login_required",
            message=locale.format(
                "portfolio.loginRequired", default="請先登入以查看投資組合"
            ),
        )

    holdings = user.stocks or []
    if not holdings:
        return PortfolioView(
            status="empty",
            message=locale.format("portfolio.empty", default="投資組合中還沒有任何股票"),
            hint=locale.format("portfolio.emptyHint", default="前往首頁購買你的第一檔股票！"),
        )

    summary = aggregate_holdings(holdings)
    logger.debug(
        "投資組合彙總: %d 檔, %d 股, 總值 %s",
        summary.stock_count, summary.total_shares, summary.total_value,
    )
    return PortfolioView(
        status="ready",
        summary=summary,
        summary_line=locale.format(
            "portfolio.summary",
            {"stockCount": summary.stock_count, "totalActions": summary.total_shares},
            default="{stockCount, plural, other {# 檔股票}} • 共 {totalActions} 股",
        ),
    )
