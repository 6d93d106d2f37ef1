################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Pytest configuration placing the repository root on the import path."""
