################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
