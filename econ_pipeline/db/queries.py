from sqlalchemy import Date, bindparam, text

# Highest data_version per (country, indicator, effective_date) wins.
LATEST_VALUES_QUERY = text("""
SELECT
    iv.country_code,
    iv.effective_date,
    iv.value,
    iv.data_version,
    iv.fetched_at
FROM indicator_values iv
JOIN (
    SELECT country_code, indicator_id, effective_date, MAX(data_version) AS max_version
    FROM indicator_values
    WHERE indicator_id = :indicator_id
    GROUP BY country_code, indicator_id, effective_date
) latest
  ON latest.country_code = iv.country_code
 AND latest.indicator_id = iv.indicator_id
 AND latest.effective_date = iv.effective_date
 AND latest.max_version = iv.data_version
WHERE iv.indicator_id = :indicator_id
  AND (:country_code IS NULL OR iv.country_code = :country_code)
ORDER BY iv.country_code, iv.effective_date
""")

VERSION_CHAIN_QUERY = text("""
SELECT
    data_version,
    value,
    fetched_at
FROM indicator_values
WHERE country_code = :country_code
  AND indicator_id = :indicator_id
  AND effective_date = :effective_date
ORDER BY data_version
""").bindparams(bindparam("effective_date", type_=Date))
