# -*- coding: utf-8 -*-
""" Kinetic energy metrics for Hamiltonian Monte Carlo. """

__authors__ = 'Matt Graham'
__license__ = 'MIT'

import kinetic.autodiff
import kinetic.errors
import kinetic.integrators
import kinetic.matrices
import kinetic.metrics
import kinetic.models
import kinetic.points
import kinetic.utils
import kinetic.writers
