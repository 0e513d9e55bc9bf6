import numpy as np
from swfloat import BF16, fp64

dtype = BF16

A0 = np.random.rand(6)  # Random array in the range [0,1)
B0 = [fp64(x).cast(dtype) for x in A0]  # Convert to the emulated format.

# Subtract the max value before exponentiation to keep exp() in range.
max_val = max(B0)
shifted_exp = [(x - max_val).exp() for x in B0]
exp_sum = sum(shifted_exp)

# softmax(x) = exp(x - max) / sum(exp(x - max))
result = [x / exp_sum for x in shifted_exp]
print("Emulated  = ", [str(x) for x in result])

np_softmax = np.exp(A0 - np.max(A0)) / np.exp(A0 - np.max(A0)).sum()
print("Reference = ", np_softmax)
