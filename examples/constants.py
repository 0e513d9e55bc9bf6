import math

from swfloat import BF16, FP16, FP32, FP64, FP128, e, from_i64, pi

# Compute the constants directly in each format.
for name, sem in [("BF16", BF16), ("FP16", FP16), ("FP32", FP32),
                  ("FP64", FP64), ("FP128", FP128)]:
    print("%-6s pi = %-40s e = %s" % (name, pi(sem), e(sem)))

# Sine at quad precision, rounded to a native double.
for i in range(0, 10):
    x = from_i64(FP128, i)
    print("sin(%d) = %r  (libm: %r)" % (i, x.sin().as_f64(), math.sin(i)))
