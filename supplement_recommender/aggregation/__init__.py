"""
Data aggregation: builds the ``AggregatedUserData`` snapshot the scoring core
reads from four upstream sources.

Modules
-------
records    : ProfileRecord, CheckinRecord, NutritionDayRecord,
             NutritionGoalsRecord - typed upstream rows.
averages   : compute_daily_averages() + compute_nutrition_averages() +
             determine_calorie_status() + extract_intolerances() - pure.
sources    : UserDataSource protocol + JsonDirectorySource +
             RestUserDataSource (httpx) + load_snapshot_file().
aggregator : build_snapshot() + aggregate_user_data() (async, concurrent) +
             aggregate_user_data_sync().
"""
