import numpy as np
from swfloat import FP32, Semantics, fp64, zero, fma

# Create two random numpy arrays in the range [0,1)
A0 = np.random.rand(1024)
A1 = np.random.rand(1024)

# Create the fp8 format (4 exponent bits, 3 mantissa bits + 1 implicit bit)
FP8 = Semantics(4, 3 + 1, "NearestTiesToEven")

# Convert the arrays to FP8
B0 = [fp64(x).cast(FP8) for x in A0]
B1 = [fp64(x).cast(FP8) for x in A1]

# Accumulate in FP32, once with fused and once with separate rounding.
fused = zero(FP32)
separate = zero(FP32)
for x, y in zip(B0, B1):
    x32, y32 = x.cast(FP32), y.cast(FP32)
    fused = fma(x32, y32, fused)
    separate = separate + x32 * y32

print("Using fp8/fp32 fma       : ", fused)
print("Using fp8/fp32 mul + add : ", separate)
print("Using fp64 numpy         : ", np.dot(A0, A1))
