from letor.transform.csv_to_letor import TransformResult, default_output_paths, save_feature_map, transform_csv

__all__ = ["TransformResult", "default_output_paths", "save_feature_map", "transform_csv"]
