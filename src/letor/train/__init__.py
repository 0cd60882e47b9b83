"""
Thin adapters over the ranking libraries: LightGBM fits the model,
scikit-learn computes (N)DCG. Nothing here implements either algorithm.
"""
