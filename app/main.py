import sys
import os
import logging
import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from shopcore.config import settings
from shopcore.constants import AMOUNT, DISCOUNT_TYPES, SOLD_OUT, LOW_STOCK_STATUS
from shopcore.domain import Coupon, Product
from shopcore.discount import add_tier, max_applicable_discount, remove_tier, update_tier
from shopcore.cart import line_total
from shopcore.coupon import empty_coupon_form
from shopcore.service import ShopSession
from shopcore.storage import JsonStorage
from shopcore.totals import savings
from shopcore.validators import (
    stock_status,
    validate_discount_value,
    validate_price,
    validate_stock,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


# ============ Инициализация ============
st.set_page_config(
    page_title="SHOP",
    page_icon="🛒",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "shop" not in st.session_state:
    st.session_state.shop = ShopSession.from_seed(
        settings.seed_path, storage=JsonStorage(settings.storage_dir)
    )

if "tiers_draft" not in st.session_state:
    st.session_state.tiers_draft = ()

shop: ShopSession = st.session_state.shop


# ============ Вспомогательные функции ============
def format_price(value: int) -> str:
    return f"{settings.currency}{value:,}"


def format_price_for_user(product: Product) -> str:
    if stock_status(product.stock) == SOLD_OUT:
        return "SOLD OUT"
    return format_price(product.price)


def show_notifications() -> None:
    """Тосты Streamlit скрываются сами, поэтому уведомления сразу снимаются"""
    icons = {"success": "✅", "error": "❌", "warning": "⚠️"}
    for n in shop.drain_notifications():
        st.toast(n.message, icon=icons.get(n.type, "ℹ️"))


def best_tier_hint(product: Product) -> str:
    if not product.discounts:
        return ""
    best = max(product.discounts, key=lambda t: t.rate)
    return f"{best.quantity} шт. и более — скидка {best.rate * 100:.0f}%"


# ============ HEADER ============
st.title("🛒 SHOP")

with st.sidebar:
    st.header("📂 Навигация")
    page = st.radio(
        "Раздел:",
        ["🏪 Магазин", "🛠️ Админ"],
        label_visibility="collapsed",
    )
    st.divider()
    st.metric("🧺 В корзине", shop.item_count())


# ============ PAGE: МАГАЗИН ============
if page == "🏪 Магазин":
    catalog_col, cart_col = st.columns([3, 2])

    with catalog_col:
        term = st.text_input("🔍 Поиск товаров", key="search_term")
        found = shop.catalog.search(term)
        st.caption(f"Всего товаров: {len(found)}")

        if not found:
            st.warning(f'По запросу "{term}" ничего не найдено.')

        for p in found:
            with st.container(border=True):
                cols = st.columns([4, 2, 2])
                with cols[0]:
                    badge = " ⭐ BEST" if p.is_recommended else ""
                    st.markdown(f"**{p.name}**{badge}")
                    if p.description:
                        st.caption(p.description)
                    hint = best_tier_hint(p)
                    if hint:
                        st.caption(hint)
                with cols[1]:
                    st.write(format_price_for_user(p))
                    remaining = shop.remaining_stock(p.id)
                    if stock_status(remaining) == LOW_STOCK_STATUS:
                        st.caption(f"Осталось {remaining} шт.")
                    elif remaining > 0:
                        st.caption(f"В наличии {remaining} шт.")
                with cols[2]:
                    sold_out = shop.remaining_stock(p.id) <= 0
                    if st.button(
                        "Нет в наличии" if sold_out else "➕ В корзину",
                        key=f"add_{p.id}",
                        disabled=sold_out,
                    ):
                        shop.add_to_cart(p.id)
                        st.rerun()

    with cart_col:
        st.subheader("🛒 Корзина")
        cart = shop.state.cart

        if not cart:
            st.info("Корзина пуста")
        else:
            for line in cart:
                pid = line.product.id
                cols = st.columns([3, 1, 1, 1, 2])
                with cols[0]:
                    st.write(f"**{line.product.name}**")
                    rate = max_applicable_discount(line, cart)
                    if rate > 0:
                        st.caption(f"-{rate * 100:.0f}%")
                with cols[1]:
                    if st.button("−", key=f"dec_{pid}"):
                        shop.update_quantity(pid, line.quantity - 1)
                        st.rerun()
                with cols[2]:
                    st.write(line.quantity)
                with cols[3]:
                    if st.button("+", key=f"inc_{pid}"):
                        shop.update_quantity(pid, line.quantity + 1)
                        st.rerun()
                with cols[4]:
                    st.write(format_price(line_total(line, cart)))
                    if st.button("🗑️", key=f"remove_{pid}"):
                        shop.remove_from_cart(pid)
                        st.rerun()

            st.divider()
            st.subheader("🎟️ Купон")
            coupons = shop.state.coupons
            options = ["—"] + [c.code for c in coupons]
            labels = {c.code: f"{c.name} ({c.code})" for c in coupons}

            def on_coupon_change() -> None:
                choice = st.session_state.coupon_choice
                if choice == "—":
                    shop.clear_coupon()
                elif not shop.apply_coupon(choice).is_ok:
                    # отказ: виджет возвращается к действующему выбору
                    current = shop.state.selected_coupon
                    st.session_state.coupon_choice = current.code if current else "—"

            selected = shop.state.selected_coupon
            st.session_state.coupon_choice = selected.code if selected else "—"
            st.selectbox(
                "Купон",
                options,
                key="coupon_choice",
                format_func=lambda code: labels.get(code, "Без купона"),
                on_change=on_coupon_change,
                label_visibility="collapsed",
            )

            st.divider()
            totals = shop.totals()
            st.write(f"Сумма товаров: {format_price(totals.total_before_discount)}")
            discount = savings(totals)
            if discount > 0:
                st.write(f"Скидка: −{format_price(discount)}")
            st.markdown(f"### 💰 Итого: **{format_price(totals.total_after_discount)}**")

            if st.button(
                f"✅ Оплатить {format_price(totals.total_after_discount)}",
                type="primary",
                use_container_width=True,
            ):
                shop.complete_order()
                st.rerun()


# ============ PAGE: АДМИН ============
elif page == "🛠️ Админ":
    st.header("🛠️ Панель администратора")
    tab_products, tab_coupons = st.tabs(["📦 Товары", "🎟️ Купоны"])

    with tab_products:
        for p in shop.state.products:
            cols = st.columns([3, 2, 1, 3, 1, 1])
            with cols[0]:
                st.write(f"**{p.name}**")
            with cols[1]:
                st.write(format_price(p.price))
            with cols[2]:
                st.write(f"{p.stock} шт.")
            with cols[3]:
                st.caption(p.description)
            with cols[4]:
                if st.button("✏️", key=f"edit_{p.id}"):
                    st.session_state.editing = p.id
                    st.session_state.tiers_draft = p.discounts
                    st.rerun()
            with cols[5]:
                if st.button("🗑️", key=f"del_{p.id}"):
                    shop.delete_product(p.id)
                    st.rerun()

        st.divider()
        editing_id = st.session_state.get("editing")
        editing = shop.catalog.find(editing_id) if editing_id else None
        st.subheader("Редактирование товара" if editing else "Новый товар")

        # ступени скидок редактируются вне формы: кнопки внутри st.form недоступны
        tiers = st.session_state.tiers_draft
        for i, tier in enumerate(tiers):
            tcols = st.columns([2, 2, 1])
            with tcols[0]:
                qty = st.number_input(
                    "Кол-во", min_value=1, value=tier.quantity, key=f"tier_q_{i}"
                )
            with tcols[1]:
                pct = st.number_input(
                    "Скидка %", min_value=0, max_value=100,
                    value=int(round(tier.rate * 100)), key=f"tier_r_{i}",
                )
            with tcols[2]:
                if st.button("✖", key=f"tier_del_{i}"):
                    st.session_state.tiers_draft = remove_tier(tiers, i)
                    st.rerun()
            tiers = update_tier(tiers, i, quantity=int(qty), rate=pct / 100)
        st.session_state.tiers_draft = tiers
        if st.button("➕ Ступень скидки"):
            st.session_state.tiers_draft = add_tier(tiers)
            st.rerun()

        with st.form("product_form", clear_on_submit=editing is None):
            name = st.text_input("Название", value=editing.name if editing else "")
            description = st.text_input(
                "Описание", value=editing.description if editing else ""
            )
            price_raw = st.text_input("Цена", value=str(editing.price) if editing else "")
            stock_raw = st.text_input("Остаток", value=str(editing.stock) if editing else "")
            submitted = st.form_submit_button("Сохранить", type="primary")

        if submitted:
            price_check = validate_price(price_raw)
            stock_check = validate_stock(stock_raw)
            for check in (price_check, stock_check):
                if check.error:
                    st.error(f"{check.error} (исправлено на {check.corrected_value})")
            if price_check.is_valid and stock_check.is_valid:
                if editing:
                    shop.update_product(
                        editing.id,
                        name=name,
                        description=description,
                        price=price_check.corrected_value,
                        stock=stock_check.corrected_value,
                        discounts=st.session_state.tiers_draft,
                    )
                else:
                    shop.add_product(
                        name=name,
                        price=price_check.corrected_value,
                        stock=stock_check.corrected_value,
                        discounts=st.session_state.tiers_draft,
                        description=description,
                    )
                st.session_state.editing = None
                st.session_state.tiers_draft = ()
                st.rerun()

    with tab_coupons:
        for c in shop.state.coupons:
            cols = st.columns([3, 2, 2, 1])
            with cols[0]:
                st.write(f"**{c.name}**")
            with cols[1]:
                st.code(c.code)
            with cols[2]:
                st.write(
                    format_price(c.discount_value)
                    if c.discount_type == AMOUNT
                    else f"{c.discount_value}%"
                )
            with cols[3]:
                if st.button("🗑️", key=f"del_coupon_{c.code}"):
                    shop.delete_coupon(c.code)
                    st.rerun()

        st.divider()
        st.subheader("Новый купон")
        blank = empty_coupon_form()
        with st.form("coupon_form", clear_on_submit=True):
            c_name = st.text_input("Название купона", value=blank.name)
            c_code = st.text_input("Код купона", value=blank.code)
            c_type = st.selectbox(
                "Тип скидки",
                DISCOUNT_TYPES,
                format_func=lambda t: "Сумма" if t == AMOUNT else "Процент",
            )
            c_value_raw = st.text_input(
                "Сумма скидки" if c_type == AMOUNT else "Скидка %",
                value=str(blank.discount_value),
            )
            c_submitted = st.form_submit_button("Создать купон", type="primary")

        if c_submitted:
            value_check = validate_discount_value(c_value_raw, c_type)
            if value_check.error:
                st.error(f"{value_check.error} (исправлено на {value_check.corrected_value})")
            if value_check.is_valid:
                shop.add_coupon(
                    Coupon(
                        name=c_name,
                        code=c_code,
                        discount_type=c_type,
                        discount_value=value_check.corrected_value,
                    )
                )
                st.rerun()


show_notifications()
