"""
SQL Queries for AdventureWorks BI
All queries target the snapshot tables built by create_database.py
Parameters use sqlite3 named style (:name)
"""

# ============================================
# SALES ANALYSIS
# ============================================

# Trailing window anchored on the latest order line, not on today's date
QUERY_MAX_ORDER_LINE_DATE = """
SELECT MAX(DATE(ModifiedDate)) AS max_date
FROM SalesOrderDetail
"""

QUERY_ROLLING_CATEGORY_SALES = """
SELECT
    STRFTIME('%Y-%m', a.ModifiedDate) AS period,
    c.Name AS subcategory_name,
    SUM(a.OrderQty) AS qty_item,
    ROUND(SUM(a.LineTotal), 2) AS total_sales,
    COUNT(DISTINCT a.SalesOrderID) AS order_cnt
FROM SalesOrderDetail AS a
LEFT JOIN Product AS b
    ON a.ProductID = b.ProductID
LEFT JOIN ProductSubcategory AS c
    ON b.ProductSubcategoryID = c.ProductSubcategoryID
WHERE DATE(a.ModifiedDate) BETWEEN :start_date AND :end_date
GROUP BY period, c.Name
ORDER BY subcategory_name, period
"""

QUERY_WINDOW_ORDER_COUNT = """
SELECT COUNT(DISTINCT SalesOrderID) AS order_cnt
FROM SalesOrderDetail
WHERE DATE(ModifiedDate) BETWEEN :start_date AND :end_date
"""

QUERY_YOY_GROWTH_TOP_SUBCATEGORIES = """
WITH sales_by_subcat_year AS (
    SELECT
        c.Name AS subcategory_name,
        CAST(STRFTIME('%Y', a.ModifiedDate) AS INTEGER) AS yr,
        SUM(a.OrderQty) AS qty_item
    FROM SalesOrderDetail AS a
    LEFT JOIN Product AS b
        ON a.ProductID = b.ProductID
    LEFT JOIN ProductSubcategory AS c
        ON b.ProductSubcategoryID = c.ProductSubcategoryID
    WHERE c.Name IS NOT NULL
    GROUP BY c.Name, yr
),
growth_base AS (
    SELECT
        subcategory_name,
        yr,
        qty_item,
        LAG(qty_item) OVER (PARTITION BY subcategory_name ORDER BY yr) AS prv_qty
    FROM sales_by_subcat_year
),
growth_calc AS (
    SELECT
        subcategory_name,
        yr,
        qty_item,
        prv_qty,
        ROUND((qty_item - prv_qty) * 1.0 / NULLIF(prv_qty, 0) * 100, 2) AS yoy_growth_percent
    FROM growth_base
    WHERE prv_qty IS NOT NULL
),
ranked AS (
    SELECT
        *,
        DENSE_RANK() OVER (ORDER BY yoy_growth_percent DESC) AS rnk
    FROM growth_calc
)
SELECT
    subcategory_name,
    yr,
    qty_item,
    prv_qty,
    yoy_growth_percent
FROM ranked
WHERE rnk <= :top_n
ORDER BY yoy_growth_percent IS NULL, yoy_growth_percent DESC, subcategory_name, yr
"""

QUERY_TOP_TERRITORIES_BY_YEAR = """
WITH yearly_territory AS (
    SELECT
        CAST(STRFTIME('%Y', d.ModifiedDate) AS INTEGER) AS yr,
        h.TerritoryID,
        SUM(d.OrderQty) AS order_qty
    FROM SalesOrderDetail AS d
    INNER JOIN SalesOrderHeader AS h
        ON d.SalesOrderID = h.SalesOrderID
    GROUP BY yr, h.TerritoryID
),
ranked AS (
    SELECT
        yr,
        TerritoryID,
        order_qty,
        DENSE_RANK() OVER (PARTITION BY yr ORDER BY order_qty DESC) AS rnk
    FROM yearly_territory
)
SELECT
    yr,
    TerritoryID,
    order_qty,
    rnk
FROM ranked
WHERE rnk <= :top_n
ORDER BY yr DESC, rnk ASC, TerritoryID
"""

# ============================================
# PROMOTION ANALYSIS
# ============================================

QUERY_SEASONAL_DISCOUNT_COST = """
WITH seasonal_discount_detail AS (
    SELECT
        CAST(STRFTIME('%Y', d.ModifiedDate) AS INTEGER) AS yr,
        d.ProductID,
        so.DiscountPct * d.UnitPrice * d.OrderQty AS discount_cost
    FROM SalesOrderDetail AS d
    INNER JOIN SpecialOffer AS so
        ON d.SpecialOfferID = so.SpecialOfferID
    WHERE so.Type = :offer_type
),
product_subcat AS (
    SELECT
        p.ProductID,
        sc.Name AS subcategory_name
    FROM Product AS p
    INNER JOIN ProductSubcategory AS sc
        ON p.ProductSubcategoryID = sc.ProductSubcategoryID
)
SELECT
    s.yr,
    ps.subcategory_name,
    ROUND(SUM(s.discount_cost), 2) AS total_discount_cost
FROM seasonal_discount_detail AS s
INNER JOIN product_subcat AS ps
    ON s.ProductID = ps.ProductID
GROUP BY s.yr, ps.subcategory_name
ORDER BY s.yr, ps.subcategory_name
"""

# ============================================
# CUSTOMER ANALYSIS
# ============================================

QUERY_COHORT_RETENTION = """
WITH orders_in_year AS (
    SELECT
        CustomerID,
        CAST(STRFTIME('%m', ModifiedDate) AS INTEGER) AS order_month
    FROM SalesOrderHeader
    WHERE Status = :status
      AND CAST(STRFTIME('%Y', ModifiedDate) AS INTEGER) = :year
),
cohort AS (
    SELECT
        CustomerID,
        MIN(order_month) AS cohort_month
    FROM orders_in_year
    GROUP BY CustomerID
),
cohort_orders AS (
    SELECT
        o.CustomerID,
        c.cohort_month,
        o.order_month - c.cohort_month AS month_offset
    FROM orders_in_year AS o
    INNER JOIN cohort AS c
        ON o.CustomerID = c.CustomerID
)
SELECT
    cohort_month,
    month_offset,
    'M' || month_offset AS month_diff,
    COUNT(DISTINCT CustomerID) AS customer_cnt
FROM cohort_orders
GROUP BY cohort_month, month_offset
ORDER BY cohort_month, month_offset
"""

# ============================================
# INVENTORY ANALYSIS
# ============================================

# Missing or zero previous stock is reported as 0% change
QUERY_MONTHLY_STOCK_TREND = """
WITH monthly_stock AS (
    SELECT
        p.Name AS product_name,
        CAST(STRFTIME('%Y', w.ModifiedDate) AS INTEGER) AS yr,
        CAST(STRFTIME('%m', w.ModifiedDate) AS INTEGER) AS mth,
        SUM(w.StockedQty) AS stock_qty
    FROM WorkOrder AS w
    INNER JOIN Product AS p
        ON w.ProductID = p.ProductID
    WHERE CAST(STRFTIME('%Y', w.ModifiedDate) AS INTEGER) = :year
    GROUP BY p.Name, yr, mth
),
with_prev AS (
    SELECT
        *,
        LAG(stock_qty) OVER (PARTITION BY product_name ORDER BY mth) AS stock_prev
    FROM monthly_stock
)
SELECT
    product_name,
    yr,
    mth,
    stock_qty,
    stock_prev,
    ROUND(COALESCE((stock_qty - stock_prev) * 1.0 / NULLIF(stock_prev, 0) * 100, 0), 1) AS mom_diff_percent
FROM with_prev
ORDER BY product_name, mth DESC
"""

# FULL OUTER JOIN written as LEFT JOIN + anti-join for SQLite < 3.39
QUERY_STOCK_TO_SALES_RATIO = """
WITH stock AS (
    SELECT
        CAST(STRFTIME('%Y', w.ModifiedDate) AS INTEGER) AS yr,
        CAST(STRFTIME('%m', w.ModifiedDate) AS INTEGER) AS mth,
        p.ProductID,
        p.Name AS product_name,
        SUM(w.StockedQty) AS stock_qty
    FROM WorkOrder AS w
    INNER JOIN Product AS p
        ON w.ProductID = p.ProductID
    WHERE CAST(STRFTIME('%Y', w.ModifiedDate) AS INTEGER) = :year
    GROUP BY yr, mth, p.ProductID, p.Name
),
sales AS (
    SELECT
        CAST(STRFTIME('%Y', d.ModifiedDate) AS INTEGER) AS yr,
        CAST(STRFTIME('%m', d.ModifiedDate) AS INTEGER) AS mth,
        p.ProductID,
        p.Name AS product_name,
        SUM(d.OrderQty) AS sales_qty
    FROM SalesOrderDetail AS d
    INNER JOIN Product AS p
        ON d.ProductID = p.ProductID
    WHERE CAST(STRFTIME('%Y', d.ModifiedDate) AS INTEGER) = :year
    GROUP BY yr, mth, p.ProductID, p.Name
),
combined AS (
    SELECT
        s.mth,
        s.yr,
        s.ProductID,
        s.product_name,
        s.stock_qty,
        sa.sales_qty
    FROM stock AS s
    LEFT JOIN sales AS sa
        ON s.ProductID = sa.ProductID
       AND s.yr = sa.yr
       AND s.mth = sa.mth
    UNION ALL
    SELECT
        sa.mth,
        sa.yr,
        sa.ProductID,
        sa.product_name,
        NULL AS stock_qty,
        sa.sales_qty
    FROM sales AS sa
    LEFT JOIN stock AS s
        ON s.ProductID = sa.ProductID
       AND s.yr = sa.yr
       AND s.mth = sa.mth
    WHERE s.ProductID IS NULL
)
SELECT
    mth,
    yr,
    ProductID,
    product_name,
    stock_qty,
    sales_qty,
    ROUND(COALESCE(stock_qty * 1.0 / NULLIF(sales_qty, 0), 0), 1) AS ratio
FROM combined
ORDER BY mth DESC, ratio DESC, product_name, ProductID
"""

# ============================================
# PURCHASING ANALYSIS
# ============================================

QUERY_PENDING_PURCHASE_ORDERS = """
SELECT
    CAST(STRFTIME('%Y', ModifiedDate) AS INTEGER) AS yr,
    Status,
    COUNT(PurchaseOrderID) AS order_count,
    ROUND(SUM(TotalDue), 2) AS total_value
FROM PurchaseOrderHeader
WHERE Status = :status
  AND CAST(STRFTIME('%Y', ModifiedDate) AS INTEGER) = :year
GROUP BY yr, Status
ORDER BY yr
"""
