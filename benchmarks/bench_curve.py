import timeit
import random
from privacy_pass.backend import get_backend
from privacy_pass.codec import decode_point, encode_point
from privacy_pass.dleq import compute_composites
from privacy_pass.hash_to_curve import derive_token_point

backend = get_backend("P-256")
r = backend.params.r

seed = random.randbytes(32)
seed1 = random.randbytes(32)
point = derive_token_point(seed)
point1 = derive_token_point(seed1)
scalar = random.randrange(1, r)

point_bytes = encode_point(point, compressed=True)
points = [derive_token_point(random.randbytes(32)) for _ in range(10)]

def bench_h2c():
    _ = derive_token_point(seed)

def bench_mul():
    _ = backend.mul(scalar, point)

def bench_add():
    _ = backend.add(point, point1)

def bench_decompress():
    _ = decode_point(point_bytes)

def bench_composites():
    _ = compute_composites(point, point1, points, points, backend)

h2c_time = timeit.timeit("bench_h2c()", globals=globals(), number=1000)
mul_time = timeit.timeit("bench_mul()", globals=globals(), number=1000)
add_time = timeit.timeit("bench_add()", globals=globals(), number=1000)
decompress_time = timeit.timeit("bench_decompress()", globals=globals(), number=1000)
composites_time = timeit.timeit("bench_composites()", globals=globals(), number=10)

print("1000 iterations")
print(f"HashToCurve time: {h2c_time:.9f} seconds")
print(f"Scalar-Point multiplication time: {mul_time:.9f} seconds")
print(f"Point addition time: {add_time:.9f} seconds")
print(f"Point decompression time: {decompress_time:.9f} seconds")
print("=======================================")
print(f"Composites over 10 tokens, 10 iterations: {composites_time:.9f} seconds")
