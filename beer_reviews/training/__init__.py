"""
End-to-end pipelines: exploratory analysis and SVM regression on
rating and text features.
"""
