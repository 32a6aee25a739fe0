"""
Cashflow modules: thin services composing kernel selectors and engines.

- dashboard: cash forecast, aging summary, KPIs and charts
- reporting: financial KPIs and charts over a date range
- settings: starting cash baseline and default currency
"""
